"""Posts job lifecycle notifications (start/success/failure) to a Slack room."""
