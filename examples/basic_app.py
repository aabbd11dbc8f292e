"""Basic Flask app using flask-zuora.

Configuration is read from the environment or a ``.env`` file (see
:mod:`flask_zuora.server`). Run with::

    python examples/basic_app.py

Then use curl:

    # Publishable key and profile for the payment form
    curl http://localhost:5000/zuora/config

    # Create an account and a payment session, returns the session token
    curl -X POST http://localhost:5000/zuora/create-payment-session \\
         -H "Content-Type: application/json" \\
         -d '{"firstName": "John", "lastName": "Doe", "currency": "USD",
              "paymentMethodType": "creditcard"}'
"""

from flask import Flask
from flask_zuora import FlaskZuora

app = Flask(__name__)
app.config["ZUORA_URL_PREFIX"] = "/zuora"

# Settings are loaded from the environment and the client authenticates here
ext = FlaskZuora(app)

if __name__ == "__main__":
    app.run(debug=True)
