"""Storage v2 API: disks, partitions, gaps and guided partitioning."""
