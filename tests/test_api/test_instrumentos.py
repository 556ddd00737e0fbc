"""API tests for /api/instrumentos."""
from tests.test_api.helpers import create_programa, create_alumno, create_instrumento


def test_create_instrumento(client):
    res = client.post("/api/instrumentos", json={
        "numero_serie": "FLT-001",
        "nombre": "Flauta traversa",
        "categoria": "Vientos madera",
        "fecha_adquisicion": "2023-05-20",
        "ubicacion": "Depósito B",
    })
    assert res.status_code == 201
    data = res.json()
    assert data["estado"] == "Disponible"
    assert data["ubicacion"] == "Depósito B"


def test_create_instrumento_in_maintenance(client):
    res = client.post("/api/instrumentos", json={
        "numero_serie": "TPT-001", "nombre": "Trompeta", "categoria": "Vientos metal", "estado": "Mantenimiento",
    })
    assert res.status_code == 201
    assert res.json()["estado"] == "Mantenimiento"


def test_create_instrumento_assigned_rejected(client):
    res = client.post("/api/instrumentos", json={
        "numero_serie": "TPT-001", "nombre": "Trompeta", "categoria": "Vientos metal", "estado": "Asignado",
    })
    assert res.status_code == 400


def test_duplicate_serie(client):
    create_instrumento(client, "VLN-001")
    res = client.post("/api/instrumentos", json={"numero_serie": "VLN-001", "nombre": "Otro", "categoria": "Cuerdas"})
    assert res.status_code == 409
    assert res.json()["error"] == "conflict"


def test_list_and_filter(client):
    create_instrumento(client, "VLN-001", "Violín 1/2")
    create_instrumento(client, "FLT-001", "Flauta", categoria="Vientos madera")
    create_instrumento(client, "VCL-001", "Violonchelo", estado="Mantenimiento")

    data = client.get("/api/instrumentos").json()
    assert data["total"] == 3

    res = client.get("/api/instrumentos", params={"estado": "Mantenimiento"})
    assert [i["numero_serie"] for i in res.json()["items"]] == ["VCL-001"]

    res = client.get("/api/instrumentos", params={"search": "flau"})
    assert [i["numero_serie"] for i in res.json()["items"]] == ["FLT-001"]


def test_list_estados(client):
    res = client.get("/api/instrumentos/estados")
    assert res.json() == ["Disponible", "Asignado", "Mantenimiento", "De Baja"]


def test_get_by_serie(client):
    instrumento_id = create_instrumento(client, "VLA-001", "Viola")
    res = client.get("/api/instrumentos/by-serie/VLA-001")
    assert res.status_code == 200
    assert res.json()["id"] == instrumento_id
    assert client.get("/api/instrumentos/by-serie/NOPE").status_code == 404


def test_update_descriptive_fields(client):
    instrumento_id = create_instrumento(client)
    res = client.put(f"/api/instrumentos/{instrumento_id}", json={"ubicacion": "Sala 2"})
    assert res.status_code == 200
    assert res.json()["ubicacion"] == "Sala 2"


def test_update_cannot_touch_estado(client):
    instrumento_id = create_instrumento(client)
    res = client.put(f"/api/instrumentos/{instrumento_id}", json={"estado": "De Baja"})
    assert res.status_code == 400
    assert client.get(f"/api/instrumentos/{instrumento_id}").json()["estado"] == "Disponible"


def test_override_estado(client):
    instrumento_id = create_instrumento(client)
    res = client.put(f"/api/instrumentos/{instrumento_id}/estado", json={
        "estado": "Mantenimiento", "motivo": "Corrección de inventario",
    })
    assert res.status_code == 200
    assert res.json()["estado"] == "Mantenimiento"


def test_override_to_asignado_conflicts(client):
    instrumento_id = create_instrumento(client)
    res = client.put(f"/api/instrumentos/{instrumento_id}/estado", json={"estado": "Asignado", "motivo": "x"})
    assert res.status_code == 409


def test_delete_instrumento(client):
    instrumento_id = create_instrumento(client)
    assert client.delete(f"/api/instrumentos/{instrumento_id}").status_code == 204
    assert client.get(f"/api/instrumentos/{instrumento_id}").status_code == 404


def test_delete_instrumento_with_history_conflicts(client):
    instrumento_id = create_instrumento(client)
    client.post("/api/movimientos", json={
        "instrumento_id": instrumento_id, "tipo_movimiento": "Entrada", "responsable": "Coordinación",
    })
    res = client.delete(f"/api/instrumentos/{instrumento_id}")
    assert res.status_code == 409


def test_historial(client):
    instrumento_id = create_instrumento(client)
    alumno_id = create_alumno(client, create_programa(client))
    asignacion = client.post("/api/asignaciones", json={
        "instrumento_id": instrumento_id, "alumno_id": alumno_id, "fecha_asignacion": "2024-01-10",
    }).json()
    client.put(f"/api/asignaciones/{asignacion['id']}/devolver", json={"fecha_devolucion": "2024-03-01"})
    client.post("/api/movimientos", json={
        "instrumento_id": instrumento_id, "tipo_movimiento": "Mantenimiento",
        "fecha_movimiento": "2024-03-05", "responsable": "Luthier",
    })

    res = client.get(f"/api/instrumentos/{instrumento_id}/historial")
    assert res.status_code == 200
    data = res.json()
    assert data["instrumento"]["estado"] == "Mantenimiento"
    assert [a["fecha_devolucion"] for a in data["asignaciones"]] == ["2024-03-01"]
    assert [m["tipo_movimiento"] for m in data["movimientos"]] == ["Mantenimiento"]
