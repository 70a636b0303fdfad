# app/routers/pages.py
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from app.web import templates

router = APIRouter()

@router.get("/", name="home", response_class=HTMLResponse)
def home(request: Request):
    return templates.TemplateResponse(request, "home/index.html")
