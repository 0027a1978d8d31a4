from fastapi import Request

from ..services.file_handler import FileHandler
from ..services.health import HealthProber
from ..services.lifecycle import JobLifecycleController
from ..services.notifier import ConnectionManager


def get_controller(request: Request) -> JobLifecycleController:
    return request.app.state.controller


def get_file_handler(request: Request) -> FileHandler:
    return request.app.state.file_handler


def get_health_prober(request: Request) -> HealthProber:
    return request.app.state.health_prober


def get_notifier(request: Request) -> ConnectionManager:
    return request.app.state.notifier
