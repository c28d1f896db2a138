"""Core: dominio, configuración, buffer y servicios del pipeline.

Por qué:
- Aquí vive la lógica con reglas (acotación, redacción, orden de etapas).
- La CLI y los adaptadores dependen del Core, no al revés.
"""
