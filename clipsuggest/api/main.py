"""FastAPI application serving clip suggestions over stored and inline transcripts.

Run with::

    uvicorn clipsuggest.api.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clipsuggest.api.routes.suggestions import router as suggestions_router
from clipsuggest.api.routes.videos import router as videos_router

app = FastAPI(
    title="Clip Suggestions API",
    description="LLM-assisted clip suggestions over video transcripts",
    version="0.1.0",
)

# Local frontends on any port; the API holds no cookies.
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1):\d+",
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(videos_router)
app.include_router(suggestions_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
