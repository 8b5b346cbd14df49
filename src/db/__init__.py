# Redis-backed storage
