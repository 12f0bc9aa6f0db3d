from contextlib import asynccontextmanager

from fastapi import FastAPI

from moodmatch.api.router import close_surface, router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Stops a dangling speech session and releases the preview handle
    close_surface()


app = FastAPI(title="MoodMatch API", lifespan=lifespan)
app.include_router(router)
