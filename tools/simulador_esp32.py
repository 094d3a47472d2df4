"""
simulador_esp32.py
==================

Emula el ESP32 del sensor de distancia contra la API de monitoreo:

  1) Anuncia el dispositivo como conectado (POST /estado)
  2) Envía N lecturas de distancia aleatorias (POST /insertar)
  3) Lee las últimas lecturas (GET /ver) para comprobar que llegaron
  4) Anuncia el dispositivo como desconectado

Uso:
    python tools/simulador_esp32.py --url http://localhost:5000 --lecturas 10
"""

import argparse
import random
import sys
import time

import requests

TIMEOUT = 5


def enviar_estado(url, nombre, conectado):
    r = requests.post(f"{url}/estado", json={"conectado": conectado, "nombre": nombre}, timeout=TIMEOUT)
    r.raise_for_status()
    return r.json()


def enviar_lectura(url, nombre, minimo=2, maximo=400):
    # El HC-SR04 mide entre 2 y 400 cm
    distancia = str(random.randint(minimo, maximo))
    r = requests.post(f"{url}/insertar", json={"distancia": distancia, "nombre": nombre}, timeout=TIMEOUT)
    r.raise_for_status()
    return r.json()


def leer_ultimas(url, limit):
    r = requests.get(f"{url}/ver", params={"limit": limit}, timeout=TIMEOUT)
    r.raise_for_status()
    return r.json()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Simulador de ESP32 para la API de monitoreo")
    parser.add_argument("--url", default="http://localhost:5000")
    parser.add_argument("--nombre", default="esp32-sim")
    parser.add_argument("--lecturas", type=int, default=10)
    parser.add_argument("--intervalo", type=float, default=1.0, help="segundos entre lecturas")
    args = parser.parse_args(argv)
    url = args.url.rstrip("/")

    try:
        enviar_estado(url, args.nombre, True)
        print(f"[{args.nombre}] conectado a {url}")
        for i in range(args.lecturas):
            res = enviar_lectura(url, args.nombre)
            print(f"  #{i + 1} distancia={res['distancia']} id={res['id']} fecha={res['fecha']}")
            if i + 1 < args.lecturas:
                time.sleep(args.intervalo)
        ultimas = leer_ultimas(url, args.lecturas)
        print(f"GET /ver devolvió {len(ultimas)} lecturas")
        enviar_estado(url, args.nombre, False)
        print(f"[{args.nombre}] desconectado")
    except requests.RequestException as e:
        print(f"Error de comunicación con la API: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
