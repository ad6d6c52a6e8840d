"""ASGI entrypoint for the meal coach API."""

from meal_coach.api.app import create_app
from meal_coach.containers import build_container

app = create_app(build_container())
