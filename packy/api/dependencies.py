from fastapi import Request

from packy.events.web_observers import ChangeFeed
from packy.infra.Template_Repository import TemplateRepository
from packy.state.State_Store import Store
from packy.state.actions import ListActions


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_actions(request: Request) -> ListActions:
    return request.app.state.actions


def get_templates(request: Request) -> TemplateRepository:
    return request.app.state.templates


def get_feed(request: Request) -> ChangeFeed:
    return request.app.state.feed
