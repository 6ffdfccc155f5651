"""HTTP over Unix domain socket transport to the installer backend."""
