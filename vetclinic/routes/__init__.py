# vetclinic/routes/__init__.py
