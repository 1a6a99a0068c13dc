# canteen/main.py
import uvicorn

from canteen.api import create_app
from canteen.utils.settings import Settings

settings = Settings.from_env()
app = create_app(settings)


def run():
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
