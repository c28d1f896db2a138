"""meteofetch: descarga, acota y redacta datos de la API de Meteomatics."""

__version__ = "0.1.0"
