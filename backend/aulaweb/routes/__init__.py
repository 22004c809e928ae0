# Routes package init
"""
Aula Web Backend — API Routes Package
=======================================

Route Inventory:
    - weather.py:   GET  /weather            (OpenWeatherMap proxy)
    - students.py:  GET  /api/students       (list, newest first)
                    POST /api/students       (create)
    - health.py:    GET  /api/health         (liveness probe)
    - spa.py:       GET  /{path}             (static files + SPA fallback)

Routes are THIN: they extract request data, call a service and return its
result. Errors are raised, never formatted here.
"""
