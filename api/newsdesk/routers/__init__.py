"""HTTP routers for the Newsdesk API."""
