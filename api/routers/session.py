from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile
from pydantic import BaseModel

from api.config import PREVIEW_QUALITY
from api.services.errors import ActionNotAllowed, ExportFailure, UnknownOption
from api.services.ingest import SourceFile
from api.services.session import PhotoSession


# Every handler is async so the session is only touched on the event-loop thread
router = APIRouter(prefix="/session", tags=["session"])


class OptionValue(BaseModel):
	value: Any


def get_session(request: Request) -> PhotoSession:
	return request.app.state.session


def _describe(session: PhotoSession) -> dict:
	snap = session.snapshot()
	return {
		"state": session.state.value,
		"count": len(snap.records),
		"selected_index": snap.selected_index,
		"options": {
			"rounded_corners": session.options.rounded_corners,
			"show_metadata_overlay": session.options.show_metadata_overlay,
			"mat": session.options.mat.value,
			"glow": session.options.glow,
		},
	}


@router.post("/photos", summary="Load photos, replacing or appending to the filmstrip")
async def load_photos(
	files: List[UploadFile] = File(...),
	mode: str = Form("replace"),
	session: PhotoSession = Depends(get_session),
):
	if mode not in ("replace", "append"):
		raise HTTPException(status_code=400, detail="mode must be 'replace' or 'append'")
	sources = []
	for f in files:
		data = await f.read()
		sources.append(SourceFile(name=f.filename or "image.jpg", data=data))
	try:
		if mode == "replace":
			result = await session.load_replace(sources)
		else:
			result = await session.load_append(sources)
	except ActionNotAllowed as e:
		raise HTTPException(status_code=409, detail=str(e))
	body = _describe(session)
	body["loaded"] = [r.source.name for r in result.records]
	body["failed"] = [{"filename": e.filename, "reason": e.reason} for e in result.failures]
	return body


@router.get("", summary="Session state, selection and display options")
async def describe(session: PhotoSession = Depends(get_session)):
	return _describe(session)


@router.get("/photos", summary="Filmstrip thumbnails in display order")
async def list_photos(session: PhotoSession = Depends(get_session)):
	snap = session.snapshot()
	return [
		{
			"index": i,
			"filename": r.source.name,
			"width": r.width,
			"height": r.height,
			"metadata": r.metadata.as_dict(),
			"thumbnail": r.display_url,
			"selected": i == snap.selected_index,
		}
		for i, r in enumerate(snap.records)
	]


@router.post("/select/{index}", summary="Select the photo to render")
async def select_photo(index: int, session: PhotoSession = Depends(get_session)):
	try:
		session.select_photo(index)
	except ActionNotAllowed as e:
		raise HTTPException(status_code=409, detail=str(e))
	return _describe(session)


@router.put("/options/{name}", summary="Change a display option")
async def set_option(name: str, body: OptionValue, session: PhotoSession = Depends(get_session)):
	try:
		session.set_option(name, body.value)
	except UnknownOption as e:
		raise HTTPException(status_code=400, detail=str(e))
	except ActionNotAllowed as e:
		raise HTTPException(status_code=409, detail=str(e))
	return _describe(session)


@router.get("/preview", summary="Current render as JPEG")
async def preview(session: PhotoSession = Depends(get_session)):
	if session.snapshot().selected is None:
		raise HTTPException(status_code=404, detail="no photo loaded")
	return Response(content=session.surface.encode_jpeg(PREVIEW_QUALITY), media_type="image/jpeg")


@router.post("/export", summary="Export the current render")
async def export_current(session: PhotoSession = Depends(get_session)):
	try:
		exported = session.export_current()
	except ActionNotAllowed as e:
		raise HTTPException(status_code=409, detail=str(e))
	except ExportFailure as e:
		raise HTTPException(status_code=500, detail=f"export failed: {e}")
	return Response(
		content=exported.data,
		media_type="image/jpeg",
		headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
	)
