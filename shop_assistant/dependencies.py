from fastapi import Request

from shop_assistant.services.recommendation import RecommendationService


def get_recommendation_service(request: Request) -> RecommendationService:
    """Provide the service instance built in the app lifespan to endpoint functions."""
    return request.app.state.recommendation_service
