"""Clinic operations app.

Models, serializers, services, views and routes for the company clinic:
visit logs, medicine and supply inventory, reimbursement requests and
the dashboard.
"""
