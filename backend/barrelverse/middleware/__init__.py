"""
Barrel + Verse Backend — Middleware Package
=============================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Session cookie] → [Access log] → [CORS] → Route

    1. Request ID: correlation id available to every later log line
    2. Session: decodes the signed cookie (a session token) into request.session
    3. Access log: method, path, status, duration, authenticated or not
    4. CORS: credentialed cross-origin requests from the front end

The session middleware sits outside the access log so the log can see
whether the request carried a session cookie.
"""
