"""Request builders shared by the API tests."""


def create_programa(client, nombre="Orquesta Infantil"):
    res = client.post("/api/programas", json={"nombre": nombre})
    assert res.status_code == 201, res.text
    return res.json()["id"]


def create_alumno(client, programa_id, nombre="Lucía Fernández"):
    res = client.post("/api/alumnos", json={
        "nombre": nombre,
        "fecha_nacimiento": "2013-04-12",
        "programa_id": programa_id,
    })
    assert res.status_code == 201, res.text
    return res.json()["id"]


def create_instrumento(client, numero_serie="VLN-001", nombre="Violín 1/2", **extra):
    res = client.post("/api/instrumentos", json={
        "numero_serie": numero_serie,
        "nombre": nombre,
        "categoria": "Cuerdas",
        **extra,
    })
    assert res.status_code == 201, res.text
    return res.json()["id"]
