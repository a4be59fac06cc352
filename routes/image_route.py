"""FastAPI routes for adding, deleting, and searching images."""

from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.image_controller import add_image, delete_image, search_by_image, search_by_name

router = APIRouter(tags=["images"])


class DeletePayload(BaseModel):
	name: str
	password: Optional[str] = None


@router.get("/search/{name}")
async def search_by_name_route(request: Request, name: str):
	"""Return image paths whose name or keywords match `name`."""
	try:
		return await search_by_name(request, name)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/search")
@router.post("/search/", include_in_schema=False)
async def search_by_image_route(request: Request, myImage: UploadFile = File(...)):
	"""Return image paths sharing keywords with the uploaded image."""
	try:
		return await search_by_image(request, myImage)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/add")
async def add_image_route(
	request: Request,
	myImage: UploadFile = File(...),
	password: Optional[str] = Form(None),
):
	"""Store an uploaded image and index it under its generated keywords."""
	try:
		return await add_image(request, myImage, password)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/delete")
async def delete_image_route(request: Request, payload: DeletePayload):
	"""Delete an image, checking its password when it has one."""
	try:
		return await delete_image(request, payload.name, payload.password)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
