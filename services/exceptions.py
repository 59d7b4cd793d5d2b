"""
Erreurs métier traduites en réponses HTTP par les handlers de main.py
"""


class RecordNotFoundError(Exception):
    """Mise à jour ou suppression d'un identifiant inexistant (404)"""

    def __init__(self, entity: str, record_id: int):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} non trouvé")


class ConcurrentModificationError(Exception):
    """Conflit de verrou optimiste: le client doit rafraîchir puis renvoyer (409)"""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(
            f"{entity} a été modifié par un autre utilisateur. "
            "Veuillez rafraîchir et réessayer."
        )


class InvalidPeriodError(ValueError):
    """Année ou mois hors limites (400)"""
