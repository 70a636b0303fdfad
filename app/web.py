from pathlib import Path
from datetime import datetime
from fastapi.templating import Jinja2Templates

# Central Jinja2Templates instance for the whole app
BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

templates.env.globals["now"] = datetime.now
