"""JSON routes the web client calls for appointment actions."""
