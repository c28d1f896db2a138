"""Adaptadores de infraestructura (HTTP, exportación).

Por qué separados del Core:
- httpx y el formato de salida son detalles; el Core solo conoce contratos.
"""
