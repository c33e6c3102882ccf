# Settings from environment variables
