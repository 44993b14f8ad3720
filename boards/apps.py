"""
App configuration for boards.
"""

from django.apps import AppConfig


class BoardsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "boards"
    verbose_name = "Task Boards"

    def ready(self):
        from audit.models import EntityType
        from audit.snapshots import model_fetcher, register

        from .models import Board, BoardList, Card, Checklist, ChecklistItem, Comment, Label, Portfolio

        # Before-images for audited updates and deletes
        register(EntityType.BOARD, model_fetcher(Board))
        register(EntityType.LIST, model_fetcher(BoardList))
        register(EntityType.CARD, model_fetcher(Card))
        register(EntityType.CHECKLIST, model_fetcher(Checklist))
        register(EntityType.CHECKLIST_ITEM, model_fetcher(ChecklistItem))
        register(EntityType.COMMENT, model_fetcher(Comment))
        register(EntityType.LABEL, model_fetcher(Label))
        register(EntityType.PORTFOLIO, model_fetcher(Portfolio))
