"""
Admin configuration for boards.
"""

from django.contrib import admin

from .models import Board, BoardList, BoardMember, Card, CardMember, Checklist, ChecklistItem, Portfolio


class BoardMemberInline(admin.TabularInline):
    model = BoardMember
    extra = 0


class CardMemberInline(admin.TabularInline):
    model = CardMember
    extra = 0


@admin.register(Portfolio)
class PortfolioAdmin(admin.ModelAdmin):
    list_display = ["name", "created_by", "created_at"]
    search_fields = ["name"]


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    list_display = ["title", "owner", "portfolio", "archived", "updated_at"]
    list_filter = ["archived"]
    search_fields = ["title"]
    inlines = [BoardMemberInline]


@admin.register(BoardList)
class BoardListAdmin(admin.ModelAdmin):
    list_display = ["title", "board", "order"]


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    list_display = ["title", "list", "due_date", "completed", "archived"]
    list_filter = ["completed", "archived"]
    search_fields = ["title"]
    inlines = [CardMemberInline]


@admin.register(Checklist)
class ChecklistAdmin(admin.ModelAdmin):
    list_display = ["title", "card"]


@admin.register(ChecklistItem)
class ChecklistItemAdmin(admin.ModelAdmin):
    list_display = ["content", "checklist", "assigned_to", "due_date", "completed"]
    list_filter = ["completed"]
