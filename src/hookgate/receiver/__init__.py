"""HTTP receiver for Notion webhook deliveries."""
