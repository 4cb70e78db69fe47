"""HTTP routers: /api/jarvis (commands) and /api/insights (finance analysis)."""
