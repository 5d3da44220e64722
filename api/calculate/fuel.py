from http.server import BaseHTTPRequestHandler
import json
import sys
import os

# repo root, so the backend package resolves without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from pydantic import ValidationError

from fuel_backend.app import gateway
from fuel_backend.app.models import FuelAnalysisRequest


class handler(BaseHTTPRequestHandler):
    def _send_json(self, status, payload):
        self.send_response(status)
        self.send_header('Content-type', 'application/json')
        self.send_header('Access-Control-Allow-Origin', '*')
        self.end_headers()
        self.wfile.write(json.dumps(payload, ensure_ascii=False).encode('utf-8'))

    def do_POST(self):
        content_length = int(self.headers.get('Content-Length', 0))
        body = self.rfile.read(content_length)

        try:
            data = json.loads(body.decode('utf-8') or '{}')
        except ValueError as e:
            # bad JSON or bad encoding
            self._send_json(400, {"error": str(e)})
            return

        try:
            req = FuelAnalysisRequest(**data) if isinstance(data, dict) else None
        except ValidationError as e:
            self._send_json(*gateway.reject_request(data, e.errors()))
            return
        if req is None:
            self._send_json(*gateway.reject_request(data, []))
            return

        status, payload = gateway.analyze(req)
        self._send_json(status, payload)

    def do_OPTIONS(self):
        """CORS preflight"""
        self.send_response(200)
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'POST, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type')
        self.end_headers()
