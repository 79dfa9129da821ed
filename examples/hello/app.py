"""Hello World — the simplest larvatus app.

Demonstrates a static route, a path parameter, writing HTML, and a JSON
response with a custom status.

Run:
    python app.py
"""

from larvatus import App, AppConfig, Request, Response

app = App(AppConfig(environment="development"))


@app.get("/")
async def index(request: Request, response: Response) -> None:
    response.write("<h1>Welcome to Larvatus!</h1>")
    response.send()


@app.get("/greet/:name")
async def greet(request: Request, response: Response) -> None:
    response.write(f"Hello, {request.params['name']}!")
    response.send()


@app.get("/api/status")
def status(request: Request, response: Response) -> None:
    response.json({"status": "ok"})
    response.send()


@app.post("/custom")
async def custom(request: Request, response: Response) -> None:
    response.set_status(201).set_header("X-Custom", "larvatus").write("Created")
    response.send()


if __name__ == "__main__":
    app.run()
