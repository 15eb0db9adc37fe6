"""
Service layer.

Routers stay thin and delegate to the services in this package:
- learning: topic progress, recommendations, streaks
- study: generated content, study plans, notes
- llm: LiteLLM client, prompts and output parsing
- profile_service: exam profile CRUD
"""
