import asyncio
from typing import Callable, Optional

from moodmatch.schemas.recommendation import (
    Movie,
    MovieCardView,
    PosterFallback,
    PosterLookup,
    RecommendationResponse,
    ResultsView,
)
from moodmatch.services.search_service import PosterSearch, lookup_poster
from moodmatch.utils.timer import ExecutionTimer

PosterLookupFn = Callable[[str, str], PosterLookup]


async def _card_poster(movie: Movie, lookup: Optional[PosterLookupFn]) -> PosterLookup:
    if lookup is None:
        return PosterFallback()
    try:
        return await asyncio.to_thread(lookup, movie.title, movie.year)
    except Exception as e:
        # A failed poster only affects its own card
        print(f"Poster lookup error for '{movie.title}': {e}")
        return PosterFallback()


async def render_results(response: RecommendationResponse, lookup: Optional[PosterLookupFn] = lookup_poster) -> ResultsView:
    """
    Turns a parsed reply into card views. Each card resolves its poster on its own;
    lookups run concurrently and in no particular order.
    """
    with ExecutionTimer(f"Poster Lookup ({len(response.movies)} Cards)"):
        posters = await asyncio.gather(*(_card_poster(movie, lookup) for movie in response.movies))

    cards = [
        MovieCardView(index=index, movie=movie, poster=poster)
        for index, (movie, poster) in enumerate(zip(response.movies, posters))
    ]
    return ResultsView(mood_analysis=response.mood_analysis, cards=cards)


async def render_with_poster_search(response: RecommendationResponse) -> ResultsView:
    """Renders one pass with every card's lookup going through a single shared session."""
    with PosterSearch() as search:
        return await render_results(response, lookup=search.lookup)
