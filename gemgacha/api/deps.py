from __future__ import annotations

import random

from fastapi import Request

from gemgacha.account_store import AccountStore
from gemgacha.settings import Settings


def get_store(request: Request) -> AccountStore:
    return request.app.state.store


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
