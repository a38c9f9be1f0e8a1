"""Application core: command orchestration."""
