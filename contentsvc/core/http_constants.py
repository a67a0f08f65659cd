"""Constantes HTTP et codes de réponse du provider.

Ce module définit les codes de statut HTTP et les `responseCode` échangés avec le provider afin
d'éviter les valeurs magiques dans le code.
"""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502
HTTP_GATEWAY_TIMEOUT = 504

HTTP_STATUS_MIN = 100
HTTP_STATUS_MAX = 600

# responseCode de l'enveloppe provider / service
RESPONSE_OK = "OK"
RESPONSE_CLIENT_ERROR = "CLIENT_ERROR"
RESPONSE_SERVER_ERROR = "SERVER_ERROR"
RESPONSE_UNAUTHORIZED = "UNAUTHORIZED_ACCESS"
RESPONSE_NOT_FOUND = "RESOURCE_NOT_FOUND"
RESPONSE_CONFLICT = "CONFLICT"

# Contenus
DRAFT_STATUS = "Draft"
RELEASE_LOCK_API = "retireLock"
CODE_SUFFIX_LENGTH = 6
