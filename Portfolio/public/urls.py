from django.urls import path
from . import views

urlpatterns = [
    path("", views.home, name="home"),
    path("experiencia", views.experiencia, name="experiencia"),
    path("estudios", views.estudios, name="estudios"),
    path("proyectos", views.proyectos, name="proyectos"),
    path("gracias", views.gracias, name="gracias"),
]
