"""Tool version. Remote .dependabot_merger.yml files must declare the same api_version."""

API_VERSION = "0.0.1"
