import time

import numpy as np

import fleetcast


def main() -> None:
    # Attaches to FLEETCAST_URL if set, otherwise starts a local server.
    server = fleetcast.run(port=0)
    client = server if isinstance(server, fleetcast.TrackerClient) else server.client()

    # Two cars driving circles around Munich.
    center = np.array([48.137, 11.575])
    radius = 0.01
    cars = {"car-1": 0.0, "car-2": np.pi}

    for uuid, phase in cars.items():
        lat, lon = center + radius * np.array([np.cos(phase), np.sin(phase)])
        print(client.join(uuid, float(lat), float(lon), 0.0)["total_cars"], "car(s) tracked")

    for step in range(1, 60):
        for uuid, phase in cars.items():
            angle = phase + step * np.pi / 30
            lat, lon = center + radius * np.array([np.cos(angle), np.sin(angle)])
            heading = float(np.degrees(angle + np.pi / 2) % 360.0)
            client.update_location(uuid, float(lat), float(lon), heading)
        time.sleep(0.5)

    print(client.locations())


if __name__ == "__main__":
    main()
