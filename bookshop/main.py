# bookshop/main.py
import uvicorn

from bookshop.api import create_app
from bookshop.utils.settings import HTTP_HOST, HTTP_PORT

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=HTTP_HOST, port=HTTP_PORT)
