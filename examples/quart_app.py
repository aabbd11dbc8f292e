"""Quart (async) app using flask-zuora.

Run with::

    pip install 'flask-zuora[quart]'
    python examples/quart_app.py

Then use curl:

    curl http://localhost:5000/config

    curl -X POST http://localhost:5000/create-payment-session \\
         -H "Content-Type: application/json" \\
         -d '{"firstName": "John", "lastName": "Doe", "currency": "USD"}'
"""

from quart import Quart
from flask_zuora import FlaskZuora

app = Quart(__name__, static_folder="../public", static_url_path="")

# The async blueprint is selected automatically for Quart apps
ext = FlaskZuora(app)

if __name__ == "__main__":
    app.run(debug=True)
