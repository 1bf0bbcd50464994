"""L5 Orchestration — strategies and the install workflow."""
