from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from . import config
from .logging_config import configure_logging

LOG = logging.getLogger("server")


class HelloResponse(BaseModel):
    message: str
    method: Optional[str] = None
    port: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    # reload workers are fresh processes with an unconfigured root logger
    configure_logging(config.LOG_LEVEL)
    # launchers look for "Server running" on stdout
    host = "localhost" if config.HOST in ("0.0.0.0", "") else config.HOST
    LOG.info("Server running at http://%s:%d/ (Port: %d)", host, config.PORT, config.PORT)
    yield
    LOG.info("Server on port %d shutting down", config.PORT)


app = FastAPI(title="multiport-hello", lifespan=lifespan)


@app.get("/api/hello", response_model=HelloResponse, response_model_exclude_none=True)
def hello_get():
    return HelloResponse(message="Hello, world!", method="GET", port=config.PORT)


@app.put("/api/hello", response_model=HelloResponse, response_model_exclude_none=True)
def hello_put():
    return HelloResponse(message="Hello, world!", method="PUT", port=config.PORT)


@app.api_route(
    "/api/hello/{name}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=HelloResponse,
    response_model_exclude_none=True,
)
def hello_name(name: str):
    return HelloResponse(message=f"Hello, {name}!", port=config.PORT)


INDEX_HTML = """
<!doctype html>
<html>
<head>
    <meta charset="utf-8" />
    <title>multiport</title>
    <style>body{font-family:system-ui,Segoe UI,Roboto,Helvetica,Arial;margin:16px}button{margin:4px}</style>
</head>
<body>
    <h2>Hello from multiport</h2>
    <div>
        <input id="name" placeholder="name" style="width:180px" />
        <button onclick="call('GET')">GET</button>
        <button onclick="call('PUT')">PUT</button>
    </div>
    <pre id="out" style="border:1px solid #ddd;padding:8px;background:#f9f9f9"></pre>
    <script>
        function call(method){
            const name = document.getElementById('name').value.trim();
            const url = name ? '/api/hello/' + encodeURIComponent(name) : '/api/hello';
            fetch(url, {method}).then(r=>r.json()).then(j=>{
                document.getElementById('out').textContent = JSON.stringify(j, null, 2);
            });
        }
    </script>
</body>
</html>
"""


# registered last so the API routes above take precedence
@app.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
def index(path: str = ""):
    return HTMLResponse(content=INDEX_HTML)


def run(host: str = config.HOST, port: int = config.PORT, reload: bool = config.RELOAD):
    import uvicorn

    # uvicorn lifecycle lines go to stderr, which the launchers forward unfiltered
    uvicorn.run("multiport.server:app", host=host, port=port, reload=reload, log_level="warning")
