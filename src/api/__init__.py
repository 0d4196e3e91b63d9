"""
FastAPI service for repo-chronicle.

Provides REST API for:
- GET /api/github/activity/{owner}/{repo} - Merged commit and pull request timeline
- POST /api/blog/generate - Article generation from one activity
- /api/articles - Saved article CRUD
- GET /health - Service health check
"""

from src.api.app import create_app

__all__ = ["create_app"]
