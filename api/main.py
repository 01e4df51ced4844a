from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.logging_setup import configure_logging
from api.routers.session import router as session_router
from api.services.session import PhotoSession


def create_app(session: Optional[PhotoSession] = None) -> FastAPI:
	configure_logging()
	app = FastAPI(title="Photo Mat Studio", version="0.1.0")

	# One session per process; tests inject their own
	app.state.session = session if session is not None else PhotoSession()

	# CORS (set PHOTOMAT_CORS_ORIGINS in production)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=get_settings().cors_origin_list(),
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	# Routers
	app.include_router(session_router)

	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn api.main:app --reload
	import uvicorn

	uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=True)
