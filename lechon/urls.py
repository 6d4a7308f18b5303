"""Lechon Slots URL Configuration"""

from django.urls import path
from . import views

app_name = 'lechon'

urlpatterns = [
    # Slots
    path('api/slots/create/', views.api_slot_create, name='api_slot_create'),
    path('api/slots/<uuid:slot_id>/', views.api_slot_detail, name='api_slot_detail'),
    path('api/slots/<uuid:slot_id>/update/', views.api_slot_update, name='api_slot_update'),
    path('api/slots/<uuid:slot_id>/delete/', views.api_slot_delete, name='api_slot_delete'),

    # Assignment
    path('api/slots/assign/', views.api_assign_order, name='api_assign_order'),
    path('api/slots/unassign/', views.api_unassign_order, name='api_unassign_order'),
    path('api/slots/reconcile/', views.api_reconcile, name='api_reconcile'),
]
