"""
Services Package for Casa Nala
==============================

Business logic behind the HTTP routes. Services take a SQLAlchemy session as
their first argument and never touch the request.

Available Services:
-------------------
- **orders**: Order Lifecycle Service (create, list, status transitions)
- **views**: Role-scoped kitchen, delivery and pickup boards
- **cart**: Client draft order and checkout submission
- **site_settings**: Weekly hours and promotions

Usage:
------
    from casa_nala.services.orders import create_order, update_order_status
    from casa_nala.services.views import kitchen_view
"""
