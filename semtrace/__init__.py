"""semtrace: metric lineage tracing and auditing for dbt semantic layers."""
