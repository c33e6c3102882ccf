from nedc_admin.main import main

main()
