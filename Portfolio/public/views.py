from django.shortcuts import render
from django.views.decorators.http import require_GET


@require_GET
def home(request):
    return render(request, "public/index.html")

@require_GET
def experiencia(request):
    return render(request, "public/experiencia.html")

@require_GET
def estudios(request):
    return render(request, "public/estudios.html")

@require_GET
def proyectos(request):
    return render(request, "public/proyectos.html")

@require_GET
def gracias(request):
    return render(request, "public/gracias.html")

def page_not_found(request, exception=None):
    return render(request, "404.html", status=404)
