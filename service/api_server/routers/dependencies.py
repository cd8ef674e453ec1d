from __future__ import annotations

from fastapi import Request

from lodexplorer.explore.facade import ExplorationFacade


def get_facade(request: Request) -> ExplorationFacade:
    return request.app.state.facade
