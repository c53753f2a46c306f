"""School fundraising campaign platform: hierarchy, teachers, campaigns, contributions."""

__version__ = "0.1.0"
