"""L0 Data — static tables for the installer."""
