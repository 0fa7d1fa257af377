import matplotlib
matplotlib.use('Agg')

from minperiod.computing.workflow import registry, register, make_final_outname
from minperiod.computing.minimal_period import minimal_period, ATOL, MAXITER
from minperiod.mapping.orbit import PeriodicOrbit, complete_orbit, orbit_to_dataframe
from minperiod.mapping.plot_orbits import plot_orbits
from minperiod.system_analysis.builtin import create_system


@register(registry, 'init', 'minimal_period')
def init_minimal_period(config, timeStamp):
    sys_dict = config['system']
    ds = create_system(sys_dict['name'], sys_dict.get('params', ()), dt=sys_dict.get('dt'))

    orbit_dict = config['orbit']
    period = orbit_dict['period']
    # integer periods mark discrete orbits
    if ds.is_discrete_time():
        period = int(period)
    else:
        period = float(period)

    u0 = orbit_dict['u0']
    po = PeriodicOrbit(complete_orbit(ds, u0, period), period, orbit_dict.get('stable'))
    print(f"Detected orbit {po} of {ds}")

    return {'system': ds, 'orbit': po}


@register(registry, 'worker', 'minimal_period')
def worker_minimal_period(config, initResult, timeStamp):
    mp_dict = config.get('minimal_period', {})
    atol = mp_dict.get('atol', ATOL)
    maxiter = mp_dict.get('maxiter', MAXITER)

    ds = initResult['system']
    po = initResult['orbit']
    min_po = minimal_period(ds, po, atol=atol, maxiter=maxiter)

    if min_po is po:
        print(f"Period {po.T} is already minimal")
    else:
        print(f"Reported period {po.T} => minimal period {min_po.T}")
    return min_po


@register(registry, 'post', 'minimal_period')
def post_minimal_period(config, initResult, workerResult, startTime):
    po = initResult['orbit']
    min_po = workerResult

    csv_name = make_final_outname(config, 'orbit', 'csv', startTime)
    orbit_to_dataframe(min_po).to_csv(csv_name, index=False)

    out_file_extension = config['output'].get('imageExtension', 'png')
    image_name = make_final_outname(config, 'portrait', out_file_extension, startTime)
    plot_orbits([(po, f"T = {po.T:.6g}", {'color': 'grey', 'linewidth': 3, 'alpha': 0.5}),
                 (min_po, f"T = {min_po.T:.6g}", {'color': 'red', 'linewidth': 1})],
                image_name,
                plot_params={'title': {'label': config['system']['name']}, 'figure': {'dpi': 150}})

    print(f"Saved {csv_name} and {image_name}")
    return {'orbit': min_po, 'csv': csv_name, 'image': image_name}
