from __future__ import annotations

import math
from dataclasses import dataclass

PAGINATION_THRESHOLD = 20


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = 20


def total_pages(state: PaginationState, total: int) -> int:
    return max(1, math.ceil(max(0, total) / max(1, state.page_size)))


def has_next(state: PaginationState, total: int) -> bool:
    return state.page < total_pages(state, total)


def should_paginate(total: int) -> bool:
    return total > PAGINATION_THRESHOLD


def next_page(state: PaginationState, total: int) -> PaginationState:
    if has_next(state, total):
        state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(1, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int, total: int | None = None) -> PaginationState:
    upper = total_pages(state, total) if total is not None else page
    state.page = min(max(1, page), max(1, upper))
    return state
