"""API contract models shared by the server routes and the client sync layer."""
