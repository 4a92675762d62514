from scripts.import_seed import import_csv

HEADER = "organization,customer,phone,device_type,serial_number,device_condition,receive_date,status,return_date,shipping_method,tracking_number\n"


def test_import_creates_directory_entries_once(tmp_path, local_store):
    csv_path = tmp_path / "tickets.csv"
    csv_path.write_text(
        HEADER
        + "Bach Mai Hospital,Nguyen Van An,0901,Camera,SN00001,No power,2024-09-01,Received,,,\n"
        + "Bach Mai Hospital,Nguyen Van An,0901,Mic,,Normal,2024-09-03,Returned,2024-09-10,Viettel Post,VN000002\n"
        + "Bach Mai Hospital,Tran Thi Binh,0902,Codec,SN00002,Firmware loop,2024-09-04,Processing,,,\n",
        encoding="utf-8",
    )

    stats = import_csv(csv_path, local_store)
    assert (stats.created, stats.skipped, stats.failed) == (3, 0, 0)
    assert len(local_store.organizations.list()) == 1
    assert len(local_store.customers.list()) == 2

    again = import_csv(csv_path, local_store)
    assert (again.created, again.skipped) == (0, 3)


def test_invalid_rows_are_counted_not_fatal(tmp_path, local_store):
    csv_path = tmp_path / "tickets.csv"
    csv_path.write_text(
        HEADER
        + "Cho Ray Hospital,Le Hoang Cuong,,Toaster,,,2024-09-01,Received,,,\n"
        + "Cho Ray Hospital,Le Hoang Cuong,,Mic,,,2024-09-02,Returned,,,\n"
        + "Cho Ray Hospital,Le Hoang Cuong,,Mic,,,2024-09-03,Received,,,\n",
        encoding="utf-8",
    )

    stats = import_csv(csv_path, local_store)
    assert (stats.created, stats.failed) == (1, 2)
    assert len(local_store.tickets.list()) == 1
