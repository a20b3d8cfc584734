"""Building blocks shared by the kubefed commands."""
