"""Student Affairs package.

Academic attendance/permission and dormitory leave/absence tracking, organized
by feature modules (entities, academic, dormitory, recap, dashboard) over a thin
Flask controller layer and service/repository layers.
"""
